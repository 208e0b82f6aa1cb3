import argparse
import logging
import mimetypes
import os
import sys

from dotenv import load_dotenv

from generator import DEFAULT_MODEL, ArtifactGenerator
from input_collector import is_accepted_mime_type
from system_prompt import REJECTION_NOTICE


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate a single-file web app from a prompt and/or an image or PDF.")
    parser.add_argument("prompt", nargs="?", default="", help="what to build (optional when --file is given)")
    parser.add_argument("--file", help="image or PDF to bring to life")
    parser.add_argument("--out", help="write the HTML here instead of stdout")
    parser.add_argument("--model", default=None, help=f"Gemini model (default: $GEMINI_MODEL or {DEFAULT_MODEL})")
    return parser.parse_args(argv)


def main(argv=None, generator=None):
    args = parse_args(argv)

    file_bytes = mime_type = None
    if args.file:
        mime_type, _ = mimetypes.guess_type(args.file)
        if not is_accepted_mime_type(mime_type):
            print(REJECTION_NOTICE, file=sys.stderr)
            return 2
        with open(args.file, "rb") as f:
            file_bytes = f.read()

    if generator is None:
        generator = ArtifactGenerator(
            api_key=os.environ.get("GEMINI_API_KEY"),
            model=args.model or os.environ.get("GEMINI_MODEL", DEFAULT_MODEL),
        )

    html = generator.generate(args.prompt, file_bytes, mime_type)

    if args.out:
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(html)
        print(f"Wrote {len(html)} characters to {args.out}", file=sys.stderr)
    else:
        print(html)
    return 0


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    sys.exit(main())
