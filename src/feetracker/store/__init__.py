from feetracker.store.file_manager import FileManager

__all__ = ["FileManager"]
