"""Allow ``python -m pcaissuer``."""

from pcaissuer.cli.main import main

main()
