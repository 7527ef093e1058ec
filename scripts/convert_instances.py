#!/usr/bin/env python3
"""Convert raw flow-shop instance files into a single Excel workbook.

This script reads all `.txt` files in the specified input directory,
parses them using the ``read_raw_instance`` function from
``cdsga.instance`` and writes an Excel workbook where each sheet
corresponds to one instance: a ``[J, M]`` header row followed by the
J x M processing-time matrix.  Sheet names are derived from the file
names (without the extension).

Usage
-----

```
python scripts/convert_instances.py --input-dir data/raw --output data/Instances.xlsx
```

Dependencies: pandas (with xlsxwriter engine) and numpy.
"""

import argparse
import sys
from pathlib import Path
import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from cdsga.instance import Instance, read_raw_instance


def instance_frame(instance: Instance) -> pd.DataFrame:
    n, m = instance.p_times.shape
    header = pd.DataFrame([[n, m]])
    body = pd.DataFrame(instance.p_times.tolist())
    return pd.concat([header, body], ignore_index=True)


def main() -> None:
    parser = argparse.ArgumentParser(description="Convert flow-shop instances to Excel workbook")
    parser.add_argument(
        "--input-dir",
        type=str,
        required=True,
        help="Directory containing raw .txt instance files",
    )
    parser.add_argument(
        "--output",
        type=str,
        required=True,
        help="Path to the output Excel file",
    )
    args = parser.parse_args()
    input_dir = Path(args.input_dir)
    output_path = Path(args.output)
    if not input_dir.exists() or not input_dir.is_dir():
        raise FileNotFoundError(f"Input directory {input_dir} does not exist or is not a directory")
    txt_files = sorted(p for p in input_dir.iterdir() if p.suffix.lower() == ".txt")
    if not txt_files:
        raise FileNotFoundError(f"No .txt files found in {input_dir}")
    # xlsxwriter produces a proper .xlsx zip file
    with pd.ExcelWriter(output_path, engine="xlsxwriter") as writer:
        for txt_file in txt_files:
            instance = read_raw_instance(str(txt_file))
            # Excel sheet names cannot exceed 31 characters
            sheet_name = instance.name[:31]
            instance_frame(instance).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    print(f"Wrote {len(txt_files)} instances to {output_path}")


if __name__ == "__main__":
    main()
