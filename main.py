from rich.pretty import pprint

from argweave import *

# `prog check --workspace`, `prog build -j 4 src`, `prog --help`, `prog check --help`
workspace = long("workspace").help("check all packages in the workspace").switch()
check = command("check", "check a package for errors", Info(descr="check a local package").for_parser(workspace))

jobs = short("j").long("jobs").help("number of parallel jobs").argument("JOBS").parse(int).fallback(1)
target = positional("TARGET")
build = command("build", "compile a package", Info(descr="compile a local package").for_parser(jobs.zip(target)))

verbosity = short("v").long("verbose").help("more output, repeatable").req_flag(()).many().map(len)

callback = Info(descr="a tiny cargo-like tool", version="0.1.0").for_parser(verbosity.zip(check | build))


if __name__ == '__main__':
    pprint(callback.run())
