import sys

from linecalc.driver import main

sys.exit(main())
