# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance for flagtree output (help, version, completion scripts)."""
from rich.console import Console

console = Console(highlight=False, soft_wrap=True)
