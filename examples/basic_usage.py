"""Basic usage example for Locator."""

import sys

from locator import ImageLocator
from locator.utils.io_handler import load_image, save_image
from locator.utils.logger import setup_logger
from locator.utils.visualization import draw_rect


def main():
    """Find a needle image in a screenshot with both matchers."""
    setup_logger('locator')

    haystack_path = sys.argv[1] if len(sys.argv) > 1 else "test_data/screenshot.png"
    needle_path = sys.argv[2] if len(sys.argv) > 2 else "test_data/button.png"

    haystack = load_image(haystack_path)
    needle = load_image(needle_path)
    if haystack is None or needle is None:
        print(f"Error: Could not load {haystack_path} or {needle_path}")
        return

    locator = ImageLocator()

    print("Searching with template correlation...")
    rect = locator.find(haystack, needle, scale=0.5, grayscale=True)
    print(f"Template match: {rect.as_tuple()}")

    print("Searching with ORB features...")
    feature_rect = locator.locate(haystack, needle)
    if feature_rect.found:
        print(f"Feature match: {feature_rect.as_tuple()}")
    else:
        print("Feature match: not found")

    roi = locator.roi_from_keyphrase("right 1/2 top 1/3", (haystack.shape[1], haystack.shape[0]))
    print(f"Top-right region: {roi.as_tuple()}")

    output_path = "output/basic_locate.png"
    save_image(draw_rect(haystack, rect), output_path)
    print(f"Results saved to {output_path}")


if __name__ == "__main__":
    main()
