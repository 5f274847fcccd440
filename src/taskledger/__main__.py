import sys

from taskledger.cli._dispatcher import main

sys.exit(main())
