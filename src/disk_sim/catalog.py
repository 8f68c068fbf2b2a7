"""Algorithm catalog — human-readable descriptions of each discipline.

The shell's ``info`` command and the web API's ``/api/algorithms``
endpoint read from here, so the wording lives in one place.
"""

from dataclasses import dataclass

from disk_sim.planner import Algorithm


@dataclass(frozen=True)
class AlgorithmInfo:
    """Display information for one scheduling algorithm.

    Attributes:
        algorithm: The algorithm being described.
        name: Full display name.
        description: One-sentence summary of the behaviour.
        details: One-sentence note on the trade-off.
        advantages: Short bullet points in its favour.
        disadvantages: Short bullet points against it.
        uses_direction: Whether the initial sweep direction matters.

    """

    algorithm: Algorithm
    name: str
    description: str
    details: str
    advantages: tuple[str, ...]
    disadvantages: tuple[str, ...]
    uses_direction: bool = True

    @property
    def short_name(self) -> str:
        """Return the name without the parenthesised abbreviation."""
        return self.name.split("(")[0].strip()

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-friendly dict."""
        return {
            "id": str(self.algorithm),
            "name": self.name,
            "description": self.description,
            "details": self.details,
            "advantages": list(self.advantages),
            "disadvantages": list(self.disadvantages),
            "uses_direction": self.uses_direction,
        }


CATALOG: dict[Algorithm, AlgorithmInfo] = {
    Algorithm.FCFS: AlgorithmInfo(
        algorithm=Algorithm.FCFS,
        name="First Come First Served (FCFS)",
        description="Services requests in the order they arrive.",
        details="Simple and fair, but seek times grow when requests are far apart.",
        advantages=(
            "Simple to implement",
            "No request ever starves",
            "Negligible scheduling overhead",
        ),
        disadvantages=(
            "High average seek time",
            "Poor performance with scattered requests",
        ),
        uses_direction=False,
    ),
    Algorithm.SSTF: AlgorithmInfo(
        algorithm=Algorithm.SSTF,
        name="Shortest Seek Time First (SSTF)",
        description="Services the request closest to the current head position.",
        details="Cuts seek time sharply but can starve requests far from the head.",
        advantages=(
            "Much lower seek time than FCFS",
            "High throughput under heavy load",
        ),
        disadvantages=(
            "Distant requests can starve",
            "Unpredictable waiting times",
        ),
        uses_direction=False,
    ),
    Algorithm.SCAN: AlgorithmInfo(
        algorithm=Algorithm.SCAN,
        name="SCAN (Elevator)",
        description=(
            "Moves in one direction servicing requests until it reaches the end"
            " of the disk, then reverses."
        ),
        details="Bounded waiting and no starvation, at the cost of a trip to the edge.",
        advantages=(
            "No starvation",
            "Low variance in response time",
        ),
        disadvantages=(
            "Extra head movement to the disk edge",
            "Requests just passed wait a full sweep",
        ),
    ),
    Algorithm.CSCAN: AlgorithmInfo(
        algorithm=Algorithm.CSCAN,
        name="Circular SCAN (C-SCAN)",
        description=(
            "Like SCAN, but at the end of the disk the arm jumps back to the"
            " other end and keeps sweeping the same way."
        ),
        details="More uniform wait times than SCAN.",
        advantages=(
            "Uniform wait times across the disk",
            "Suits heavy, evenly spread loads",
        ),
        disadvantages=(
            "The return jump adds head movement",
            "Wasteful under light load",
        ),
    ),
    Algorithm.LOOK: AlgorithmInfo(
        algorithm=Algorithm.LOOK,
        name="LOOK",
        description=(
            "Like SCAN, but the arm only travels as far as the last request"
            " in each direction."
        ),
        details="Avoids SCAN's unnecessary trip to the end of the disk.",
        advantages=(
            "Less head movement than SCAN",
            "Keeps SCAN's fairness",
        ),
        disadvantages=(
            "Service is less uniform than C-LOOK",
            "Needs to know the outermost request",
        ),
    ),
    Algorithm.CLOOK: AlgorithmInfo(
        algorithm=Algorithm.CLOOK,
        name="C-LOOK",
        description=(
            "Like C-SCAN, but the arm only goes as far as the last request"
            " before returning to the first one."
        ),
        details="Avoids C-SCAN's unnecessary trips to both ends of the disk.",
        advantages=(
            "Uniform wait times with little wasted movement",
            "Usually the lowest seek time of the SCAN family",
        ),
        disadvantages=(
            "The return jump still costs movement",
            "Needs to know both outermost requests",
        ),
    ),
}


def describe(algorithm: Algorithm) -> AlgorithmInfo:
    """Return the catalog entry for *algorithm*."""
    return CATALOG[algorithm]


def all_algorithms() -> list[AlgorithmInfo]:
    """Return every catalog entry in enum order."""
    return [CATALOG[a] for a in Algorithm]
