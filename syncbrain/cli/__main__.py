"""Allow ``python -m syncbrain.cli`` execution."""

from syncbrain.cli.manage import main

main()
