#!/usr/bin/env python3
"""Allow running as: python -m phonogen"""

import sys

from phonogen.cli import main

sys.exit(main())
