import sys

from cosmicparticles.cli import main

sys.exit(main())
