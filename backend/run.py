from countnum import create_app

app = create_app()

if __name__ == '__main__':
    # Threaded dev server; the room store serializes access itself
    app.run(host='0.0.0.0', port=app.config['PORT'], debug=True, threaded=True)
