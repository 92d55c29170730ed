import sys

from spotilens import main

sys.exit(main())
