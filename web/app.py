"""FastAPI web adapter for the Hypothetical Machine emulator."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Optional

from hypo import run_program, RunOptions
from hypo.arith import MEM_SIZE


# Constants
MAX_PROGRAM_SIZE = 50 * 1024  # 50KB


# Request/Response models
class RunOptionsModel(BaseModel):
    max_steps: int = Field(default=10000, ge=1, le=1000000)
    trace: bool = True
    trace_watch: list[int] = Field(default_factory=list)
    trace_include_io: bool = True


class RunRequest(BaseModel):
    program: str
    inputs: list[int] = Field(default_factory=list)
    options: Optional[RunOptionsModel] = None


class ErrorResponse(BaseModel):
    type: str
    message: str
    step: int
    addr: int
    kind: Optional[str] = None
    source_line_no: Optional[int] = None
    source_text: Optional[str] = None


class FinalState(BaseModel):
    pc: int
    ac: int
    mq: int
    state: str


class RunResponse(BaseModel):
    status: str
    output: list[int]
    steps_executed: int
    final_state: FinalState
    trace_watch: list[int]
    trace: list[dict]
    error: Optional[ErrorResponse] = None


# Create FastAPI app
app = FastAPI(
    title="Hypothetical Machine Emulator",
    description="Web API for executing Hypothetical Machine programs with tracing",
    version="0.1.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/run", response_model=RunResponse)
async def run_code(request: RunRequest):
    """Execute a Hypothetical Machine program.

    Args:
        request: Program text, GET input values, and execution options

    Returns:
        Execution result with output, trace, and final state
    """
    # Validate program size
    if len(request.program) > MAX_PROGRAM_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Program size exceeds limit of {MAX_PROGRAM_SIZE} bytes",
        )

    opts = request.options or RunOptionsModel()

    for addr in opts.trace_watch:
        if not 0 <= addr < MEM_SIZE:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid watch address: {addr}",
            )

    run_opts = RunOptions(
        max_steps=opts.max_steps,
        trace=opts.trace,
        trace_watch=opts.trace_watch,
        trace_include_io=opts.trace_include_io,
    )

    result = run_program(
        program_text=request.program,
        inputs=request.inputs,
        options=run_opts,
    )

    return result.to_dict()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
