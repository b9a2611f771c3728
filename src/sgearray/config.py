import sys

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "SGEARRAY_"}

    # Slicing: number of files per input/output/error subdirectory
    slice_size: int = Field(default=1000, ge=1)

    # Array job submission
    task_step: int = Field(default=1000, ge=1)
    max_array_size: int = Field(default=50000, ge=1)  # scheduler hard limit is 75000
    qsub_executable: str = "qsub"
    qsub_options: str = ""

    # Worker script interpreter (written into the "#$ -S" directive)
    interpreter: str = sys.executable or "/usr/bin/python3"

    # Working directory layout (relative to the work dir)
    log_dir: str = "log"
    input_dir: str = "input"
    output_dir: str = "output"
    error_dir: str = "error"
    script_file: str = "script.py"
    manifest_file: str = "count.txt"

    # Logging
    log_level: str = "INFO"
