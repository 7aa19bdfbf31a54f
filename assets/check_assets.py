# assets/check_assets.py
"""
Reports which of the GUI's icons and themes are present, so a checkout can be
verified before the application is started.
"""
from pathlib import Path
import sys

# Add the project root to the Python path to allow importing our modules
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root))

try:
    from arithma_tech.gui.resources import AVAILABLE_THEMES, ICONS_PATH, REQUIRED_ICONS, THEMES_PATH
except ImportError as e:
    print("Error: Could not import project modules. Run this script from the project root or install the project.")
    print(f"Details: {e}")
    sys.exit(1)


def check_assets() -> bool:
    """Prints a found/missing line for every expected asset and returns True if none are missing."""
    print("--- Asset Sanity Check ---")

    missing = []
    print(f"Checking for themes in: {THEMES_PATH}")
    for theme_file in AVAILABLE_THEMES.values():
        if (THEMES_PATH / theme_file).exists():
            print(f"  [FOUND] {theme_file}")
        else:
            print(f"  [MISSING] {theme_file}")
            missing.append(theme_file)

    print(f"Checking for icons in: {ICONS_PATH}")
    for icon_name in REQUIRED_ICONS:
        icon_file = f"{icon_name}.svg"
        if (ICONS_PATH / icon_file).exists():
            print(f"  [FOUND] {icon_file}")
        else:
            print(f"  [MISSING] {icon_file}")
            missing.append(icon_file)

    print("\n--- Summary ---")
    if not missing:
        print("✅ Success! All assets were found.")
        return True

    print(f"❌ {len(missing)} assets are missing. The application falls back to default icons and styling:")
    for name in missing:
        print(f"  - {name}")
    return False


if __name__ == "__main__":
    sys.exit(0 if check_assets() else 1)
