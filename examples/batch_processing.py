"""Search one screenshot for many needles, extracting its features once."""

from pathlib import Path

from locator import ImageLocator
from locator.utils.io_handler import load_image
from locator.utils.logger import setup_logger


def main():
    """Locate every needle in a directory inside one screenshot."""
    logger = setup_logger('batch_locator')

    haystack = load_image("test_data/screenshot.png")
    if haystack is None:
        logger.error("No screenshot found")
        return

    locator = ImageLocator({"matching": {"random_seed": 0}})
    haystack_features = locator.extract_features(haystack)
    logger.info(f"Screenshot has {len(haystack_features[0])} keypoints")

    needle_paths = sorted(Path("test_data/needles").glob("*.png"))
    logger.info(f"Found {len(needle_paths)} needles")

    for needle_path in needle_paths:
        needle = load_image(needle_path)
        if needle is None:
            logger.warning(f"Could not read {needle_path}")
            continue

        rect = locator.locate_with_features(
            haystack, needle, haystack_features, locator.extract_features(needle)
        )
        status = rect.as_tuple() if rect.found else "not found"
        logger.info(f"{needle_path.name}: {status}")


if __name__ == "__main__":
    main()
