from bingo import create_app, run_server

app = create_app()

if __name__ == '__main__':
    # Use SocketIO server to enable websockets in dev
    run_server(app, debug=True)
