from rich import print

from flagtree import Command, MutexGroupViolationError, RequiredGroupViolationError
from flagtree.utils import setup_logging

setup_logging()


def build() -> Command:
    cmd = Command("convert", description="Convert a document")
    cmd.bool("json", "j", "Write JSON")
    cmd.bool("yaml", "y", "Write YAML")
    cmd.path_flag("input", "i", "Input file")
    cmd.path_flag("output", "o", "Output file")
    cmd.add_mutex_group("format", ["json", "yaml"], allow_none=False)
    cmd.add_required_group("files", ["input", "output"])
    return cmd


for argv in (
    ["-j", "-i", "in.md", "-o", "out.json"],
    ["-jy", "-i", "in.md", "-o", "out"],
    ["--yaml", "-i", "in.md"],
):
    try:
        cmd = build()
        cmd.parse(argv)
        print(f"[green]ok[/]    {argv}")
    except (MutexGroupViolationError, RequiredGroupViolationError) as error:
        print(f"[red]error[/] {argv}: {error} ({error.code})")
