from .base import LanguageHandler

class PythonRunner(LanguageHandler):
    tag = "python"
    extension = ".py"
    default_file = "main.py"

    def __init__(self, python_bin: str = "python3"):
        self.python_bin = python_bin

    def run_command(self, entry: str) -> str:
        return f"{self.quote(self.python_bin)} {self.quote(entry)}"
