import sys

from median_filter.cli import main

sys.exit(main())
