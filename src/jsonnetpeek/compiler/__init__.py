from .driver import JsonnetDriver, failure_report
from .ksonnet import ext_code_files, find_app_root, is_in_app, root_path
