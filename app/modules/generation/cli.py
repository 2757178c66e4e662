from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path

from app.core.config import settings
from app.modules.generation.errors import GenerationError
from app.modules.generation.model_client import PydanticAIModelClient
from app.modules.generation.models import ContentKind, Difficulty, GenerationRequest
from app.modules.generation.pipeline import GenerationPipeline
from app.modules.generation.prompts import build_prompt


def _load_source(args: argparse.Namespace) -> str:
    if args.source and args.source_file:
        raise SystemExit("Provide either --source or --source-file, not both")
    if args.source_file:
        return Path(args.source_file).read_text(encoding="utf-8")
    if args.source:
        return args.source
    raise SystemExit("--source or --source-file is required")


def _request_from_args(args: argparse.Namespace) -> GenerationRequest:
    return GenerationRequest(
        kind=ContentKind(args.kind),
        source=_load_source(args),
        count=args.num,
        title=args.title,
        description=args.description,
        difficulty=Difficulty(args.difficulty),
    )


def _add_request_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "kind",
        choices=[ContentKind.FLASHCARD_SET.value, ContentKind.QUIZ.value],
        help="Content kind to generate",
    )
    p.add_argument("--source", "-s", help="Source material (text)")
    p.add_argument("--source-file", help="Path to a file containing the source")
    p.add_argument("--num", "-n", type=int, default=5, help="Number of items")
    p.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.MEDIUM.value,
    )
    p.add_argument("--title", default="Untitled")
    p.add_argument("--description", default="Generated from the command line")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="study-forge", description="Flashcard and quiz generator CLI"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p = sub.add_parser("prompt", help="Print the instruction sent to the model")
    _add_request_args(p)

    g = sub.add_parser(
        "generate", help="Generate content without saving it (prints JSON)"
    )
    _add_request_args(g)

    args = parser.parse_args(argv)
    req = _request_from_args(args)
    choice_count = settings.generation.quiz_choice_count

    if args.cmd == "prompt":
        req.admit(max_count=settings.generation.max_num)
        print(build_prompt(req, choice_count=choice_count))
        return 0
    if args.cmd == "generate":
        pipeline = GenerationPipeline(
            client=PydanticAIModelClient(),
            max_count=settings.generation.max_num,
            choice_count=choice_count,
        )
        try:
            content = asyncio.run(pipeline.preview(req))
        except GenerationError as e:
            print(json.dumps({"error": e.to_dict()}, indent=2))
            return 1
        print(json.dumps(content.model_dump(by_alias=True), indent=2))
        return 0

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
