import os
import copy
import logging
import yaml

DEFAULT_CONFIG = {
    'Paths': {
        'LOG_PATH': '/var/log/housekeeper.log',
        'MONITOR_PATH': '/',
        'LOG_DIR': '/var/log',
        'BACKUP_DIR': '/var/backups',
        'TEMP_DIR': '/tmp',
        'ALERT_STATE_FILE': '/tmp/disk_alert_timestamp',
        'LOCAL_DIR': None,
        'FAILED_TRANSFERS_FILE': '/tmp/failed_transfers.txt'
    },
    'Settings': {
        'WARNING_PERCENTAGE': 75,
        'THRESHOLD_PERCENTAGE': 85,
        'CRITICAL_PERCENTAGE': 90,
        'REPEAT_ALERT_INTERVAL': 30,
        'CLEAN_PACKAGE_CACHE': True,
        'MAX_RETRIES': 3,
        'RETRY_DELAY': 60,
        'NOTIFICATIONS_ENABLED': False,
        'NOTIFICATION_URLS': [],
        'MAX_LOG_SIZE_MB': 100,
        'BACKUP_COUNT': 1,
        'LOG_LEVEL': 'INFO'
    },
    'FTP': {
        'HOST': None,
        'PORT': 21,
        'USER': 'anonymous',
        'PASSWORD': '',
        'REMOTE_DIR': '/',
        'TIMEOUT': 30,
        'USE_TLS': False,
        'PASSIVE': True
    }
}

def _to_bool(value):
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')

def _to_list(value):
    if isinstance(value, str):
        return [x.strip() for x in value.split(',') if x.strip()]
    if isinstance(value, list):
        return value
    return [str(value)] if value else []

ENV_MAPPINGS = {
    'LOG_PATH': ('Paths', 'LOG_PATH'),
    'MONITOR_PATH': ('Paths', 'MONITOR_PATH'),
    'LOG_DIR': ('Paths', 'LOG_DIR'),
    'BACKUP_DIR': ('Paths', 'BACKUP_DIR'),
    'TEMP_DIR': ('Paths', 'TEMP_DIR'),
    'ALERT_STATE_FILE': ('Paths', 'ALERT_STATE_FILE'),
    'LOCAL_DIR': ('Paths', 'LOCAL_DIR'),
    'FAILED_TRANSFERS_FILE': ('Paths', 'FAILED_TRANSFERS_FILE'),
    'WARNING_PERCENTAGE': ('Settings', 'WARNING_PERCENTAGE', float),
    'THRESHOLD_PERCENTAGE': ('Settings', 'THRESHOLD_PERCENTAGE', float),
    'CRITICAL_PERCENTAGE': ('Settings', 'CRITICAL_PERCENTAGE', float),
    'REPEAT_ALERT_INTERVAL': ('Settings', 'REPEAT_ALERT_INTERVAL', float),
    'CLEAN_PACKAGE_CACHE': ('Settings', 'CLEAN_PACKAGE_CACHE', _to_bool),
    'MAX_RETRIES': ('Settings', 'MAX_RETRIES', int),
    'RETRY_DELAY': ('Settings', 'RETRY_DELAY', float),
    'NOTIFICATIONS_ENABLED': ('Settings', 'NOTIFICATIONS_ENABLED', _to_bool),
    'NOTIFICATION_URLS': ('Settings', 'NOTIFICATION_URLS', _to_list),
    'MAX_LOG_SIZE_MB': ('Settings', 'MAX_LOG_SIZE_MB', int),
    'BACKUP_COUNT': ('Settings', 'BACKUP_COUNT', int),
    'LOG_LEVEL': ('Settings', 'LOG_LEVEL', str),
    'FTP_HOST': ('FTP', 'HOST'),
    'FTP_PORT': ('FTP', 'PORT', int),
    'FTP_USER': ('FTP', 'USER'),
    'FTP_PASSWORD': ('FTP', 'PASSWORD'),
    'FTP_REMOTE_DIR': ('FTP', 'REMOTE_DIR'),
    'FTP_TIMEOUT': ('FTP', 'TIMEOUT', float),
    'FTP_USE_TLS': ('FTP', 'USE_TLS', _to_bool),
    'FTP_PASSIVE': ('FTP', 'PASSIVE', _to_bool),
}

def get_script_dir():
    return os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

def load_config(config_path=None, require_ftp=False):
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        if not os.path.exists(config_path):
            raise ValueError(f"Configuration file not found: {config_path}")
        final_config_path = config_path
    else:
        script_dir = get_script_dir()
        final_config_path = os.path.join(script_dir, 'config.yml')

    if os.path.exists(final_config_path):
        with open(final_config_path, 'r') as config_file:
            file_config = yaml.safe_load(config_file) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file must contain a mapping: {final_config_path}")

        for section in config:
            section_update = file_config.get(section) or {}
            if not isinstance(section_update, dict):
                raise ValueError(f"Section '{section}' must be a mapping")
            config[section].update(section_update)

    for env_var, (section, key, *convert) in ENV_MAPPINGS.items():
        env_value = os.environ.get(env_var)
        if env_value is not None:
            if convert:
                env_value = convert[0](env_value)
            config[section][key] = env_value

    settings = config['Settings']
    settings['NOTIFICATION_URLS'] = _to_list(settings['NOTIFICATION_URLS'])
    settings['NOTIFICATIONS_ENABLED'] = _to_bool(settings['NOTIFICATIONS_ENABLED'])
    settings['CLEAN_PACKAGE_CACHE'] = _to_bool(settings['CLEAN_PACKAGE_CACHE'])
    config['FTP']['USE_TLS'] = _to_bool(config['FTP']['USE_TLS'])
    config['FTP']['PASSIVE'] = _to_bool(config['FTP']['PASSIVE'])

    if not config['FTP'].get('REMOTE_DIR'):
        config['FTP']['REMOTE_DIR'] = '/'

    settings['LOG_LEVEL'] = str(settings['LOG_LEVEL']).strip().upper()
    if not isinstance(logging.getLevelName(settings['LOG_LEVEL']), int):
        raise ValueError(f"Unknown LOG_LEVEL: {settings['LOG_LEVEL']}")

    warning = settings['WARNING_PERCENTAGE']
    threshold = settings['THRESHOLD_PERCENTAGE']
    critical = settings['CRITICAL_PERCENTAGE']

    if not 0 < warning <= threshold <= critical <= 100:
        raise ValueError("Thresholds must satisfy 0 < WARNING_PERCENTAGE <= THRESHOLD_PERCENTAGE "
                         "<= CRITICAL_PERCENTAGE <= 100")

    if settings['MAX_RETRIES'] < 1:
        raise ValueError("MAX_RETRIES must be at least 1")
    if settings['RETRY_DELAY'] < 0:
        raise ValueError("RETRY_DELAY cannot be negative")
    if settings['REPEAT_ALERT_INTERVAL'] < 0:
        raise ValueError("REPEAT_ALERT_INTERVAL cannot be negative")

    if require_ftp:
        missing = []
        if not config['FTP'].get('HOST'):
            missing.append('FTP.HOST')
        if not config['Paths'].get('LOCAL_DIR'):
            missing.append('Paths.LOCAL_DIR')
        if missing:
            raise ValueError(f"Required settings not configured: {', '.join(missing)}. "
                             f"Please set via config.yml or environment variables.")

    return config
