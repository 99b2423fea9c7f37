from audio_classifier import create_app
from audio_classifier.utils.logger import setup_logger

app = create_app()
logger = setup_logger()

if __name__ == '__main__':
    logger.info("Starting Audio Classifier Backend")
    app.run(host='0.0.0.0', port=5000, debug=app.config['DEBUG'])
