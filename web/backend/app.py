"""
CPU scheduler comparison - FastAPI backend
"""

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any, Union

from core.dispatcher import Dispatcher, EmptyWorkloadError
from core.job import Job
from schedulers.comparison import run_comparison
from schedulers.policies import (DEFAULT_POLICY_KEYS, DEFAULT_QUANTUM, build_policies, build_policy,
                                 describe_policies)

app = FastAPI(
    title="CPU Scheduler Comparison",
    description="Single-CPU scheduling policy simulator",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class JobInput(BaseModel):
    name: str = Field(min_length=1)
    arrival: int = Field(ge=0)
    service: int = Field(gt=0)
    priority: int = 0


class SimulationRequest(BaseModel):
    jobs: List[JobInput]
    policies: List[str] = Field(default_factory=lambda: list(DEFAULT_POLICY_KEYS))
    quantum: int = DEFAULT_QUANTUM
    live_remaining: bool = False


class GanttEntryModel(BaseModel):
    name: str
    start_time: int
    end_time: int
    state: str


class CompletionRecordModel(BaseModel):
    name: str
    arrival: int
    wait: int
    completion_tick: int


class SimulationResult(BaseModel):
    algorithm: str
    policy: str
    records: List[CompletionRecordModel]
    gantt_chart: List[GanttEntryModel]
    statistics: Dict[str, Union[int, float]]
    event_log: List[str]


def create_job_objects(job_inputs: List[JobInput]) -> List[Job]:
    return [Job(j.name, j.arrival, j.service, j.priority) for j in job_inputs]


def serialize_result(result: Dict) -> Dict:
    """Dispatcher result dictionary → JSON-friendly SimulationResult"""
    return SimulationResult(
        algorithm=result['algorithm'],
        policy=result['policy'],
        records=[CompletionRecordModel(name=r.name, arrival=r.arrival, wait=r.wait,
                                       completion_tick=r.completion_tick)
                 for r in result['records']],
        gantt_chart=[GanttEntryModel(name=e.name, start_time=e.start_time, end_time=e.end_time,
                                     state=e.state.value)
                     for e in result['gantt_chart']],
        statistics=result['statistics'],
        event_log=result['event_log']
    ).model_dump()


def build_requested_policies(request: SimulationRequest):
    return build_policies(request.policies, quantum=request.quantum,
                          live_remaining=request.live_remaining)


@app.get("/")
async def root():
    return {"message": "CPU Scheduler Comparison API", "version": "1.0.0"}


@app.get("/policies")
async def get_policies():
    return {"policies": describe_policies()}


@app.post("/simulate")
async def simulate(request: SimulationRequest):
    """Run each requested policy on the workload"""
    try:
        jobs = create_job_objects(request.jobs)
        report = run_comparison(jobs, build_requested_policies(request))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"success": True, "results": [serialize_result(r) for r in report.results]}


@app.post("/simulate/compare")
async def compare_policies(request: SimulationRequest):
    """Run each requested policy and name the lowest average wait"""
    try:
        jobs = create_job_objects(request.jobs)
        report = run_comparison(jobs, build_requested_policies(request))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "results": [serialize_result(r) for r in report.results],
        "comparison": {
            "averages": report.averages,
            "best": report.best
        }
    }


class RealtimeSimulator:
    """Tick-by-tick driver for one WebSocket session"""

    def __init__(self, jobs: List[Job], policy_key: str, quantum: int = DEFAULT_QUANTUM,
                 live_remaining: bool = False):
        if not jobs:
            raise EmptyWorkloadError("no jobs to schedule")
        self.policy = build_policy(policy_key, quantum=quantum, live_remaining=live_remaining)
        self.dispatcher = Dispatcher(jobs, self.policy)
        self.is_complete = False
        self.last_log_index = 0
        self.last_record_index = 0

    def step(self) -> Dict[str, Any]:
        if self.is_complete:
            return {'complete': True}

        self.is_complete = self.dispatcher.step()

        new_logs = self.dispatcher.event_log[self.last_log_index:]
        self.last_log_index = len(self.dispatcher.event_log)

        new_records = [
            {'name': r.name, 'arrival': r.arrival, 'wait': r.wait, 'completion_tick': r.completion_tick}
            for r in self.dispatcher.records[self.last_record_index:]
        ]
        self.last_record_index = len(self.dispatcher.records)

        message = {
            'complete': self.is_complete,
            'snapshot': self.dispatcher.get_current_snapshot(),
            'new_logs': new_logs,
            'new_records': new_records
        }
        if self.is_complete:
            self.dispatcher.update_statistics()
            message['statistics'] = self.dispatcher.stats.calculate_averages()
        return message


@app.websocket("/ws/realtime")
async def websocket_realtime(websocket: WebSocket):
    """
    Realtime simulation

    Client messages: {"action": "init", "jobs": [...], "policy": "rr", "quantum": 2},
    {"action": "step"}, {"action": "run"}.
    """
    await websocket.accept()
    simulator: Optional[RealtimeSimulator] = None

    try:
        while True:
            message = await websocket.receive_json()
            action = message.get('action')

            if action == 'init':
                try:
                    jobs = [Job(j['name'], j['arrival'], j['service'], j.get('priority', 0))
                            for j in message.get('jobs', [])]
                    simulator = RealtimeSimulator(
                        jobs,
                        message.get('policy', 'rr'),
                        message.get('quantum', DEFAULT_QUANTUM),
                        message.get('live_remaining', False)
                    )
                except (AttributeError, KeyError, TypeError, ValueError) as e:
                    await websocket.send_json({'type': 'error', 'message': str(e)})
                    continue
                await websocket.send_json({
                    'type': 'initialized',
                    'algorithm': simulator.policy.name,
                    'job_count': len(jobs)
                })

            elif action in ('step', 'run'):
                if simulator is None:
                    await websocket.send_json({'type': 'error', 'message': 'simulation not initialized'})
                    continue
                while True:
                    state = simulator.step()
                    await websocket.send_json({'type': 'step', **state})
                    if action == 'step' or state['complete']:
                        break

            else:
                await websocket.send_json({'type': 'error', 'message': f'unknown action: {action}'})

    except WebSocketDisconnect:
        pass
