# scripts/analyze_resume.py
#!/usr/bin/env python3
"""
Score a resume for ATS compatibility and list improvements

Usage:
    python scripts/analyze_resume.py --resume data/resume.json
    python scripts/analyze_resume.py --resume data/resume.yaml --job data/jobs/backend.txt
    python scripts/analyze_resume.py --resume data/resume.json --job data/jobs/backend.txt --apply-all --output reports/ats.json
"""

import argparse
import json
import logging
import sys
import yaml
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from resume.config import get_config
from resume.errors import AnalysisError
from resume.models import ResumeSnapshot
from resume.ats.analyzer import ATSAnalyzer
from resume.ats.models import AnalysisMode

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


def load_resume(resume_file: str) -> ResumeSnapshot:
    """Load a resume snapshot from a JSON or YAML file"""
    path = Path(resume_file)

    if not path.exists():
        raise FileNotFoundError(f"Resume file not found: {resume_file}")

    with open(path, 'r', encoding='utf-8') as f:
        if path.suffix.lower() in ('.yaml', '.yml'):
            data = yaml.safe_load(f)
        else:
            data = json.load(f)

    return ResumeSnapshot.from_dict(data)


def score_bar(value: int) -> str:
    return '█' * (value // 10)


def print_summary(result, title: str = "ATS ANALYSIS"):
    """Print score and breakdown"""
    print("\n" + "=" * 70)
    print(f"{title:^70}")
    print("=" * 70)
    print()

    score_color = (
        '\033[92m' if result.score >= 80 else   # Green
        '\033[93m' if result.score >= 60 else   # Yellow
        '\033[91m'                                # Red
    )
    reset_color = '\033[0m'

    estimate = " (estimate)" if result.score_is_estimate else ""
    print(f"ATS Score: {score_color}{result.score}/100{reset_color}{estimate}")
    print(f"Potential: {result.potential_score}/100")
    print()

    print("Breakdown:")
    for section in result.section_scores:
        print(f"  {section.label:<18} {section.score:3d}/100  {score_bar(section.score):<10} {section.feedback}")
    print()


def print_keywords(result, limit: int = 15):
    keywords = result.keywords
    if not keywords.found and not keywords.missing:
        return

    print("=" * 70)
    print("KEYWORDS")
    print("=" * 70)
    print()
    print(f"  Found:   {', '.join(keywords.found[:limit]) or '-'}")
    print(f"  Missing: {', '.join(keywords.missing[:limit]) or '-'}")
    print()


def print_improvements(result):
    """Print pending improvements in priority order"""
    pending = result.pending_improvements
    if not pending:
        return

    print("=" * 70)
    print(f"IMPROVEMENTS ({len(pending)})")
    print("=" * 70)
    print()

    for i, imp in enumerate(pending, 1):
        print(f"  {i}. [{imp.priority.value.upper()}] {imp.title} (+{imp.impact})")
        print(f"     {imp.description}")
        if imp.suggested_value:
            for line in imp.suggested_value.splitlines():
                print(f"     → {line}")
        print()


def main():
    parser = argparse.ArgumentParser(
        description='Score a resume for ATS compatibility'
    )

    parser.add_argument(
        '--resume',
        required=True,
        help='Path to resume file (.json or .yaml)'
    )

    parser.add_argument(
        '--job',
        help='Path to job description text file'
    )

    parser.add_argument(
        '--mode',
        choices=[m.value for m in AnalysisMode],
        default=AnalysisMode.WITH_JD.value,
        help='Score against the job description or in general mode'
    )

    parser.add_argument(
        '--apply-all',
        action='store_true',
        help='Apply every improvement and rescore'
    )

    parser.add_argument(
        '--output',
        help='Output file for JSON report'
    )

    parser.add_argument(
        '--seed',
        type=int,
        help='Seed for generated bullet and verb suggestions'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        resume = load_resume(args.resume)

        job_text = ""
        if args.job:
            job_text = Path(args.job).read_text(encoding='utf-8')

        config = get_config()
        if args.seed is not None:
            config.rng_seed = args.seed

        analyzer = ATSAnalyzer(config)
        result = analyzer.analyze(resume, job_text, args.mode)

        print_summary(result)
        print_keywords(result)
        print_improvements(result)

        report = {'analysis': result.to_dict()}

        if args.apply_all:
            outcome = analyzer.apply_all(result, resume)
            fresh = analyzer.recompute(outcome.result, outcome.resume, job_text, args.mode)
            print_summary(fresh, "AFTER APPLYING IMPROVEMENTS")
            print(f"Estimated {outcome.result.score}/100, recomputed {fresh.score}/100")
            report['applied'] = {
                'resume': outcome.resume.to_dict(),
                'result': fresh.to_dict(),
                'estimated_score': outcome.result.score,
            }

        if args.output:
            output_path = Path(args.output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                json.dump(report, f, indent=2)
            print(f"Report saved: {output_path}")

        sys.exit(0)

    except (AnalysisError, OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"ERROR: {e}")
        sys.exit(2)


if __name__ == '__main__':
    main()
