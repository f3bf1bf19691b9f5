import sys

from monkeytitles.cli import main

sys.exit(main())
