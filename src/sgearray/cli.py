"""CLI runner: split a flatfile query and submit it as Grid Engine array jobs."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
import textwrap

from pydantic import ValidationError

from sgearray.adapters.qsub import QsubLauncher
from sgearray.config import Settings
from sgearray.core.array_job import ArrayJob
from sgearray.errors import ConfigError, SgeArrayError
from sgearray.models import ChunkResult, JobConfig

logger = logging.getLogger(__name__)

EPILOG = textwrap.dedent("""\
    command placeholders:
      {query}        fragmented query file name (== input_file)
      {target}       target database file name
      {work_dir}     current working directory
      {task_id}      SGE_TASK_ID
      {slice}        (task_id - 1) / slice_size + 1
      {input_file}   input/{slice}/{task_id}
      {output_file}  output/{slice}/{task_id}
      {error_file}   error/{slice}/{task_id}

    examples:
      %(prog)s -q data/query.pep -t data/target.pep -c 'blastall -p blastp -i {query} -d {target}' -o '-l cpu_arch=xeon'
      %(prog)s -q data/hsa.pep -t data/Pfam-A.hmm -m 1000 -M 2000 -s 10 -c 'hmmscan --tblout output/{slice}/{task_id}.tbl {target} {query}'
      %(prog)s --distclean
""")

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sgearray",
        description="Split a flatfile query into one file per entry and run a command "
                    "on each of them as Grid Engine array jobs",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-q", "--query", default=None, help="Flatfile including multiple entries")
    parser.add_argument("-t", "--target", default=None, help="Database file to be used")
    parser.add_argument("-c", "--command", default=None, help="Command line to be executed per entry")
    parser.add_argument("-o", "--qsub-opts", default=None,
                        help="Additional qsub options, e.g. '-l s_vmem=16G -l mem_req=16'")
    parser.add_argument("-m", "--task-min", type=int, default=None, help="First task (default: 1)")
    parser.add_argument("-M", "--task-max", type=int, default=None,
                        help="Last task (default: number of entries in query)")
    parser.add_argument("-s", "--task-step", type=int, default=None,
                        help="Tasks per array job instance (default: 1000)")
    parser.add_argument("--work-dir", default=None, help="Working directory (default: cwd)")
    parser.add_argument("--clear", action="store_true",
                        help="Remove the worker script and output/error/log directories")
    parser.add_argument("--clean", action="store_true",
                        help="Remove the count file and the extracted input directory")
    parser.add_argument("--distclean", action="store_true", help="Both --clear and --clean")
    parser.add_argument("--dry-run", action="store_true", help="Prepare but only print qsub commands")
    parser.add_argument("--concurrent", action="store_true", help="Submit chunks concurrently")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def _config_error(exc: ValidationError) -> ConfigError:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return ConfigError(f"Invalid configuration: {details}")


def build_settings(args: argparse.Namespace) -> Settings:
    overrides: dict = {}
    if args.qsub_opts is not None:
        overrides["qsub_options"] = args.qsub_opts
    if args.task_step is not None:
        overrides["task_step"] = args.task_step
    if args.log_level:
        overrides["log_level"] = args.log_level
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise _config_error(exc) from exc


def build_job(args: argparse.Namespace, settings: Settings) -> JobConfig:
    try:
        return JobConfig.from_settings(
            settings,
            work_dir=args.work_dir,
            query=args.query,
            target=args.target,
            command=args.command,
            task_min=args.task_min,
            task_max=args.task_max,
        )
    except ValidationError as exc:
        raise _config_error(exc) from exc


def _report(results: list[ChunkResult]) -> int:
    failed = [r for r in results if not r.ok]
    for r in results:
        print(f"  [{r.status.value}] -t {r.chunk.span}")
    if failed:
        print(f"{len(failed)} of {len(results)} chunks failed; resubmit with:")
        for r in failed:
            print(f"  -m {r.chunk.start} -M {r.chunk.end}")
        return EXIT_PARTIAL
    return EXIT_OK


async def run(args: argparse.Namespace) -> int:
    settings = build_settings(args)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    )
    job = build_job(args, settings)
    aj = ArrayJob(job, settings, launcher=QsubLauncher(cwd=job.work_dir))

    if args.distclean:
        aj.distclean()
    else:
        if args.clear:
            aj.clear()
        if args.clean:
            aj.clean()
    if (args.clear or args.clean or args.distclean) and not args.command:
        return EXIT_OK

    aj.prepare()
    results = await aj.submit(concurrent=args.concurrent, dry_run=args.dry_run)
    return _report(results)


def main():
    parser = build_parser()
    args = parser.parse_args()

    if len(sys.argv) == 1:
        parser.print_help()
        sys.exit(EXIT_FATAL)

    if args.work_dir and not os.path.isdir(args.work_dir):
        parser.error(f"--work-dir {args.work_dir} is not a directory")

    try:
        code = asyncio.run(run(args))
    except SgeArrayError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        code = EXIT_FATAL
    sys.exit(code)


if __name__ == "__main__":
    main()
