from loggerlink import ConnectionAdapter, RetryPolicy, log

# Settings
HOST = 'localhost'
PORT = 6789
LOGGER = 'CR1000'
PROGRAM = r'C:\Campbellsci\Lib\CRBasicPrograms\station.cr1'

def main():
    log('INFO', console=True, loggers='all')
    print(f"Connecting to LoggerNet server {HOST}:{PORT} ...")
    # Give the asynchronous connect one second to land before giving up
    adapter = ConnectionAdapter(HOST, PORT, retry_policy=RetryPolicy(max_attempts=1, backoff=1))
    print(f"Sending  : {PROGRAM} to {LOGGER}...")
    result = adapter.send_program_file(LOGGER, PROGRAM)
    # Wait for the send complete event
    result.wait(60)
    print(f"Result   : {adapter.operation_result()}")
    adapter.shut_down_logger(LOGGER)

if __name__ == '__main__':
    main()
