from prompt_toolkit import PromptSession

from flagtree import Command
from flagtree.completion import CommandCompleter
from flagtree.validators import number_range, prompt_validator

app = Command("app")
workers = app.int("workers", "w", "Worker count", default=4, validator=number_range(1, 64))
app.enum("level", "l", "Log level", default="info", choices=["debug", "info", "warning"])
app.add_subcommand(Command("start", description="Start workers"))

session = PromptSession()

if __name__ == "__main__":
    line = session.prompt("app> ", completer=CommandCompleter(app))
    count = session.prompt("workers> ", validator=prompt_validator(workers), default=str(workers.get()))
    workers.set(count)
    print(f"args: {line!r}, workers: {workers.get()}")
