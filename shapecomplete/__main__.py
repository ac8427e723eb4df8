import sys

from shapecomplete.cli import main

sys.exit(main())
