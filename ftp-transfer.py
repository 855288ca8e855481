#!/usr/bin/env python3

import sys

from housekeeper.cli import ftp_transfer_main

if __name__ == '__main__':
    sys.exit(ftp_transfer_main())
