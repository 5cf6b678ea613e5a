import sys

from rdebug.main import main

sys.exit(main())
