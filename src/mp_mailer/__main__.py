"""``python -m mp_mailer``."""

import sys

from mp_mailer.cli import main

sys.exit(main())
