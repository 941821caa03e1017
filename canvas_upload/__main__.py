import sys

from canvas_upload.cli import main

sys.exit(main())
