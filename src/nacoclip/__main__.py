import sys

from nacoclip.main import main

sys.exit(main())
