import sys

from servicewire.bootstrap import main

if __name__ == "__main__":
    sys.exit(main())
