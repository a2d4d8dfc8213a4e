import sys

from finetune_studio.cli import main

sys.exit(main())
