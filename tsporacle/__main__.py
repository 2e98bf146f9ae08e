import sys

from tsporacle.cli import main

sys.exit(main())
