import sys

from components_generator.cli.commands import main

sys.exit(main())
