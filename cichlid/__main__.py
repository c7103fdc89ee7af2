import sys

from cichlid.main import main

sys.exit(main())
