import sys

from cpboard.main import main

sys.exit(main())
