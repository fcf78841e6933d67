from .base import LanguageHandler

class NodeRunner(LanguageHandler):
    tag = "javascript"
    aliases = ("node", "js")
    extension = ".js"
    default_file = "main.js"

    def __init__(self, node_bin: str = "node"):
        self.node_bin = node_bin

    def run_command(self, entry: str) -> str:
        return f"{self.quote(self.node_bin)} {self.quote(entry)}"
