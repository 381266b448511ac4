import argparse
import asyncio
import json
import logging
import sys
from typing import Optional, get_args

from writing_eval.core.exceptions import EvaluationException, ValidationException
from writing_eval.models.analysis import AnalysisResult
from writing_eval.models.request import AnalysisRequest, ExamLevel, TaskType
from writing_eval.services.evaluation.post_process import parse_analysis_output
from writing_eval.services.highlight import annotate_text


def _read_writing(args) -> Optional[str]:
    if args.text:
        return args.text
    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


async def _analyze(req: AnalysisRequest) -> AnalysisResult:
    from writing_eval.client.bootstrap import build_llm
    from writing_eval.core.config import settings
    from writing_eval.services.writing_analyzer import WritingAnalyzer
    from writing_eval.utils.prompt_loader import PromptLoader

    analyzer = WritingAnalyzer(build_llm(), PromptLoader(version=settings.PROMPT_VERSION))
    return await analyzer.analyze(req)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Analyze a Cambridge CAE/CPE writing sample")
    parser.add_argument("--level", default="CAE", choices=get_args(ExamLevel), help="Exam level")
    parser.add_argument("--task", default="Essay", choices=get_args(TaskType), help="Task type")
    group = parser.add_mutually_exclusive_group(required=False)
    group.add_argument("--text", help="Writing sample to analyze")
    group.add_argument("--file", help="Path to a file containing the writing sample")
    parser.add_argument(
        "--model-output",
        help="Parse a saved model response from this file instead of calling the LLM",
    )
    parser.add_argument("--annotate", action="store_true", help="Also print the text with inline error markers")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    try:
        writing = _read_writing(args)
    except OSError as e:
        print(f"Failed to read file: {e}", file=sys.stderr)
        return 2

    if not writing or not writing.strip():
        print("No text provided. Use --text, --file, or pipe input.", file=sys.stderr)
        return 2

    if args.model_output:
        try:
            with open(args.model_output, "r", encoding="utf-8") as f:
                output = f.read()
        except OSError as e:
            print(f"Failed to read model output: {e}", file=sys.stderr)
            return 2
        result = parse_analysis_output(output, writing)
    else:
        req = AnalysisRequest(examLevel=args.level, taskType=args.task, writing=writing)
        try:
            result = asyncio.run(_analyze(req))
        except ValidationException as e:
            print(f"{e.error}: {e.message}", file=sys.stderr)
            return 2
        except EvaluationException as e:
            print(f"Analysis failed: {e.message}", file=sys.stderr)
            return 1

    print(json.dumps(result.to_payload(), ensure_ascii=False, indent=2))
    if args.annotate:
        print()
        print(annotate_text(writing, result.errors))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
