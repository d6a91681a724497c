import sys

from wright_stv.cli import main

sys.exit(main())
