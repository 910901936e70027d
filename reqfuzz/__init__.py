from .errors import FuzzError, MalformedTemplate, WordlistError, TransportError, InvalidMethod, ConfigError
from .template import CompiledTemplate, compile_template, materialize
from .work_queue import WorkQueue
from .models import HeaderTemplate, SubstitutionPlan, DispatchPolicy, RequestOutcome, DispatchSummary
from .engine import Dispatcher

__version__ = "0.3.0"
