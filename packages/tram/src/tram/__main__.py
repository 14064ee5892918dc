import sys

from tram.demo import main

sys.exit(main())
