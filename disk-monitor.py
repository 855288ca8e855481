#!/usr/bin/env python3

import sys

from housekeeper.cli import disk_monitor_main

if __name__ == '__main__':
    sys.exit(disk_monitor_main())
