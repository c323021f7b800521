from .result_writer import ResultWriter, result_filename

__all__ = ["ResultWriter", "result_filename"]
