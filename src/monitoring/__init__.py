"""
Monitoring for the interaction runtime.

- events / bus: typed MonitoringEvents over an in-process pub/sub bus
- logger: JSONL event sink and the log_event helper
- status: StatusSink implementations
- dashboard_tui: rich live dashboard
"""
