import sys

from tokenlaw.cli import main

sys.exit(main())
