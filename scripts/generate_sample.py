#!/usr/bin/env python
"""
Generate a sample image, and optionally an edit of it, against the live API.

Usage:
    python scripts/generate_sample.py [--output FILE] [--prompt TEXT] [--edit TEXT]
"""

import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from imgen.core.api import CreateRequest, EditRequest
from imgen.core.client import ImagesClient
from imgen.core.config import Config
from imgen.core.inputs import ImageData
from imgen.utils.exceptions import ImgenError


def main() -> None:
    """Generate a sample image."""
    parser = argparse.ArgumentParser(description="Generate a sample image")
    parser.add_argument(
        "--output",
        default="sample_output.png",
        help="Output filename (default: sample_output.png)",
    )
    parser.add_argument(
        "--prompt",
        default="a serene mountain landscape at dawn with misty valleys",
        help="Prompt for generation",
    )
    parser.add_argument("--edit", help="Optional edit prompt applied to the generated image")

    args = parser.parse_args()

    print(f"Generating image with prompt: {args.prompt}")
    print()

    config = Config.from_env()
    config.validate()
    client = ImagesClient(config)

    try:
        result = client.create_images(
            CreateRequest(prompt=args.prompt, model=config.image_model, n=1, quality="low")
        )
        image = result.images[0]
        if args.edit:
            print(f"Editing with prompt: {args.edit}")
            result = client.edit_images(
                EditRequest(
                    prompt=args.edit,
                    images=[
                        ImageData(
                            content=image.content,
                            filename=f"sample.{image.extension}",
                            content_type=f"image/{image.format.lower()}",
                        )
                    ],
                    model=config.image_model,
                    n=1,
                    quality="low",
                )
            )
            image = result.images[0]
    except ImgenError as e:
        print(f"❌ Generation failed: {e}")
        sys.exit(1)

    Path(args.output).write_bytes(image.content)

    print("✓ Image generated successfully!")
    print(f"  - Saved to: {args.output}")
    print(f"  - Size: {image.width}x{image.height} {image.format}")
    if result.usage is not None:
        print(f"  - Estimated cost: ${result.usage.calculate_cost():.4f}")


if __name__ == "__main__":
    main()
