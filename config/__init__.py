# config package: authoritative source for autofill configuration.
#
# Sub-modules:
#   api_config.py   : generation service endpoint, model identifier, API key env var
#   model_params.py : generation parameters, batch budget, retry schedule
#   behavior.py     : answer-writing and enable-flag switches
