#!/usr/bin/env python3
"""
Print the interaction tensors.

Usage:
    python tools/print_tensors.py          # 2D transition matrix
    python tools/print_tensors.py --3d     # 3D tensor, one plane per first morphism
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from lambda7.tensor import format_tensor_2d, format_tensor_3d, get_tensor_2d, get_tensor_3d


def main(argv=None):
    parser = argparse.ArgumentParser(description="Print lambda7 interaction tensors")
    parser.add_argument("--3d", dest="three_d", action="store_true", help="print the 3D tensor")
    args = parser.parse_args(argv)

    if args.three_d:
        print(format_tensor_3d(get_tensor_3d()))
    else:
        print(format_tensor_2d(get_tensor_2d()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
