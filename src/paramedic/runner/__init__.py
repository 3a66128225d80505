"""Run orchestration: scaffolding, cordova invocation, waiting and teardown."""
