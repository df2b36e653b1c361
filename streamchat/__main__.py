from streamchat.main import run

run()
