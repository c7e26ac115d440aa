import sys

from geowalk.cli import main

sys.exit(main())
