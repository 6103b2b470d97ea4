# -*- coding: utf-8 -*-
# Meshport/main.py

"""
End-to-end driver:
  1) Parse command-line options (or a JSON configuration file)
  2) Detect the source format and read the mesh
  3) Optionally clean / triangulate / decimate / smooth / compute normals
  4) Write the target format (single file or batch into a directory)

Run `python main.py --help` for the full option list.
"""

import sys

from meshport.cli import main


if __name__ == "__main__":
    sys.exit(main())
