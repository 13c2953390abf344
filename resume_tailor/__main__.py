"""
CLI entry point for resume extraction and tailoring.
"""

import argparse
import getpass
import json
import logging
import mimetypes
import sys
from pathlib import Path

from . import __version__
from .config import TailorConfig
from .errors import PipelineError
from .models import Identity, ResumeRecord, UploadedDocument
from .pipeline import ResumePipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-tailor",
        description="AI Resume Tailor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s parse resume.pdf -o resume.json
  %(prog)s tailor resume.json job_posting.txt -o tailored.md
  %(prog)s --model gpt-4o-mini tailor resume.json job_posting.txt
        """,
    )
    parser.add_argument(
        "--model",
        default=None,
        help="Model override (default: MODEL env var or gemini-2.0-flash)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    parse_cmd = subparsers.add_parser(
        "parse", help="Extract a structured resume from a PDF, DOCX, DOC or TXT file"
    )
    parse_cmd.add_argument("document", help="Path to the resume document")
    parse_cmd.add_argument("-o", "--output", help="Write JSON here instead of stdout")

    tailor_cmd = subparsers.add_parser(
        "tailor", help="Rewrite a structured resume for a job description"
    )
    tailor_cmd.add_argument("resume_json", help="Path to a resume JSON file")
    tailor_cmd.add_argument("job_description", help="Path to a job description text file")
    tailor_cmd.add_argument("-o", "--output", help="Write markdown here instead of stdout")

    return parser


def _emit(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print(f"✓ Written to {output}", file=sys.stderr)
    else:
        print(text)


def main(argv=None) -> int:
    """Run extraction or tailoring from the command line."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = TailorConfig.from_env(model=args.model)
    pipeline = ResumePipeline(config)
    # Local runs act on behalf of the OS user.
    identity = Identity(user_id=getpass.getuser() or "local")

    try:
        if args.command == "parse":
            path = Path(args.document)
            upload = UploadedDocument(
                content=path.read_bytes(),
                content_type=mimetypes.guess_type(path.name)[0],
                filename=path.name,
            )
            record = pipeline.extract_resume(identity, upload)
            _emit(json.dumps(record.to_wire(), indent=2, ensure_ascii=False), args.output)
        else:
            resume = ResumeRecord.model_validate_json(
                Path(args.resume_json).read_text(encoding="utf-8")
            )
            job_description = Path(args.job_description).read_text(encoding="utf-8")
            tailored = pipeline.tailor_resume(identity, resume, job_description)
            _emit(tailored, args.output)
    except PipelineError as e:
        print(f"✗ [{e.code.value}] {e.message}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
