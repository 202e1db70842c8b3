import sys

from rich import print

from flagtree import Command, FlagTreeError, FlowSignal
from flagtree.utils import setup_logging
from flagtree.validators import port

setup_logging()

app = Command("deployctl", "d", "Deploy and manage services")
app.set_version("1.4.0")
app.set_completion(True)
app.set_env_prefix("DEPLOYCTL")
app.set_logo_text("~~ deployctl ~~")
verbose = app.bool("verbose", "V", "Verbose output")

serve = Command("serve", "s", "Run the local preview server")
listen = serve.int("port", "p", "Port to listen on", default=8080, validator=port())
listen.bind_env("PORT")
timeout = serve.duration("timeout", "t", "Shutdown grace period", default="30s")


def run_serve(cmd: Command) -> None:
    print(f"[green]serving[/] on :{listen.get()} (grace {timeout.get()}, verbose={verbose.get()})")


serve.set_run(run_serve)

release = Command("release", "r", "Push a release")
target = release.enum("target", "T", "Target environment", default="staging", choices=["staging", "prod"])
tags = release.string_slice("tags", "", "Extra image tags")
release.add_example("Release to production", "deployctl release --target prod --tags latest,v2")
release.set_run(lambda cmd: print(f"releasing to [bold]{target.get()}[/] with tags {tags.get()}"))

app.add_subcommands(serve, release)
app.add_note("serve --port can also be set through DEPLOYCTL_PORT.")

if __name__ == "__main__":
    try:
        app.parse_and_run()
    except FlowSignal:
        sys.exit(0)
    except FlagTreeError as error:
        print(f"[red]error:[/] {error}")
        sys.exit(2)
