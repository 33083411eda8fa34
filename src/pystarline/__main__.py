import sys

from pystarline.cli import main

sys.exit(main())
